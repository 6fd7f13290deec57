"""
LLM completion client used by the chat flow
"""
from typing import Iterable, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from quranpro.config.settings import settings
from quranpro.database import Message, Sender


def build_messages(system_prompt: str, history: Iterable[Message], user_message: str) -> List[BaseMessage]:
    """System prompt, then the context turns oldest to newest, then the new user message"""
    messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for item in history:
        if item.sender == Sender.USER.value:
            messages.append(HumanMessage(content=item.text))
        else:
            messages.append(AIMessage(content=item.text))
    messages.append(HumanMessage(content=user_message))
    return messages


class CompletionClient:
    """Thin wrapper over ChatOpenAI; one synchronous call per exchange"""

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        system_prompt: Optional[str] = None,
    ):
        self.model = model or settings.OPENAI_MODEL
        self.temperature = settings.OPENAI_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.OPENAI_MAX_TOKENS
        self.system_prompt = system_prompt or settings.CHAT_SYSTEM_PROMPT
        self._llm: Optional[ChatOpenAI] = None

    @property
    def llm(self) -> ChatOpenAI:
        if self._llm is None:
            self._llm = ChatOpenAI(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                max_retries=0,
                api_key=settings.OPENAI_API_KEY,
            )
        return self._llm

    def complete(self, history: Iterable[Message], user_message: str) -> str:
        """Return the assistant reply; any client error propagates to the caller"""
        response = self.llm.invoke(build_messages(self.system_prompt, history, user_message))
        return response.content
