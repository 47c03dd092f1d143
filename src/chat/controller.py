"""Conversation controller wiring state transitions to I/O.

Owns the current ``ChatState`` and applies the pure transitions from
``src.chat.state``. Side effects are injected: the completion client
answers questions and the history store persists sessions.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from src.agent.chat_agent import CompletionClient
from src.chat import state as transitions
from src.chat.history import HistoryStore
from src.chat.state import ChatState, ChatStatistics
from src.models import Document, Session

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    return datetime.now().astimezone()


class ConversationController:
    """Single-conversation orchestrator.

    All methods run on one event loop. At most one completion request is in
    flight: ``send_message`` is ignored while a request is pending or no
    document is active. Uploading, loading a session, or starting a new chat
    while a request is pending discards its answer when it arrives.
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        history_store: HistoryStore,
        clock: Callable[[], datetime] = local_now,
        on_change: Callable[[ChatState], None] | None = None,
    ) -> None:
        """Initialize the controller and load saved history.

        Args:
            completion_client: Answers questions given document context.
            history_store: Persists the session list.
            clock: Timestamp source for new messages.
            on_change: Called with the new state after every transition.
        """
        self._client = completion_client
        self._store = history_store
        self._clock = clock
        self._on_change = on_change
        self._conversation = 0
        self._state = ChatState(history=history_store.load())
        logger.info(f"Loaded {len(self._state.history)} saved chat sessions")

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def statistics(self) -> ChatStatistics:
        return transitions.chat_statistics(self._state)

    def upload_document(self, document: Document) -> None:
        logger.info(f"Active document set to {document.name}")
        self._switch_conversation(transitions.upload_document(self._state, document))

    def clear_document(self) -> None:
        self._switch_conversation(transitions.clear_document(self._state))

    def load_session(self, session: Session) -> None:
        self._switch_conversation(transitions.load_session(self._state, session))

    def new_chat(self) -> None:
        self._switch_conversation(transitions.new_chat(self._state))

    async def send_message(self, text: str) -> None:
        """Ask a question about the active document.

        The user's message is shown immediately. A failed request becomes a
        fixed apology from the assistant; nothing is raised to the caller.
        If the conversation is switched while the request is pending, the
        answer is discarded instead of landing in the new conversation.
        """
        if not transitions.can_send(self._state, text):
            return

        context = self._state.document.extracted_text
        question = text.strip()
        conversation = self._conversation
        self._apply(transitions.begin_request(self._state, question, self._clock()))

        try:
            answer = await self._client.generate_response(question, context)
        except Exception as e:
            logger.warning(f"Completion failed, replying with fallback: {e}")
            answer = None

        if conversation != self._conversation:
            logger.info("Conversation changed while waiting, discarding answer")
            self._apply(transitions.abandon_request(self._state))
        elif answer is None:
            self._apply(transitions.fail_request(self._state, self._clock()))
        else:
            self._apply(transitions.complete_request(self._state, answer, self._clock()))

    def _switch_conversation(self, new_state: ChatState) -> None:
        self._conversation += 1
        self._apply(new_state)

    def _apply(self, new_state: ChatState) -> None:
        if new_state.messages != self._state.messages:
            new_state = self._sync(new_state)
        self._state = new_state
        if self._on_change is not None:
            self._on_change(new_state)

    def _sync(self, new_state: ChatState) -> ChatState:
        synced = transitions.sync_session(new_state)
        if synced is not new_state:
            self._store.save(synced.history)
        return synced
