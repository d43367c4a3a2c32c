"""Multi-turn chat with the medical assistant."""

from ..dto.ai_dto import ChatRequest, ChatResponse
from ..services.ai_gateway import AIGateway

_ROLES = ("user", "assistant")


class ChatWithAssistantUseCase:
    def __init__(self, ai_gateway: AIGateway):
        self._ai_gateway = ai_gateway

    async def execute(self, request: ChatRequest) -> ChatResponse:
        turns = [
            {"role": message["role"], "content": message["content"].strip()}
            for message in request.messages
            if message.get("content", "").strip()
        ]
        if not turns:
            raise ValueError("At least one non-empty message is required")
        for turn in turns:
            if turn["role"] not in _ROLES:
                raise ValueError(f"Unsupported chat role: {turn['role']}")
        if turns[-1]["role"] != "user":
            raise ValueError("The last message must come from the user")

        reply = await self._ai_gateway.chat(turns)
        return ChatResponse(reply=reply.text, used_fallback=reply.from_fallback)
