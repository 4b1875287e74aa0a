import logging
import threading
from enum import Enum
from typing import Dict, List, Optional, Tuple

from chat_frontend_streamlit.exchange import ExchangeClient, ExchangeError

logger = logging.getLogger(__name__)

PERSONA_MESSAGE = (
    "You are Cav, an AI assistant who helps students choose the right Physics programme "
    "at the University of Cambridge."
)
GREETING_MESSAGE = (
    "👋 Hello! I'm your Cambridge Physics postgraduate advisor. I can help you find suitable "
    "programs and supervisors based on your background and interests.\n\n"
    "To get started, could you tell me about the physics courses you completed during your "
    "undergraduate studies?"
)
RESULTS_ACKNOWLEDGEMENT = (
    "Thank you for providing your information. Based on your background and interests, "
    "I've found some potential matches for you. Please see the recommendations below."
)
ERROR_MESSAGE = (
    "I'm sorry, I encountered an error while processing your request. Please try again."
)


class Stage(str, Enum):
    COLLECTING_BACKGROUND = "collecting-background"
    COLLECTING_INTERESTS = "collecting-interests"
    AWAITING_RECOMMENDATIONS = "awaiting-recommendations"
    SHOWING_RESULTS = "showing-results"


# Textual replies move the conversation one step along; later stages stay put
_NEXT_STAGE = {
    Stage.COLLECTING_BACKGROUND: Stage.COLLECTING_INTERESTS,
    Stage.COLLECTING_INTERESTS: Stage.AWAITING_RECOMMENDATIONS,
}


def extract_results(data: Dict) -> Optional[Dict[str, List[Dict]]]:
    """Return {programs, supervisors} when the reply carries both collections, else None."""
    programs = data.get("programs")
    supervisors = data.get("supervisors")
    if not (isinstance(programs, list) and isinstance(supervisors, list)):
        return None
    # Cards read every item as a mapping
    if all(isinstance(item, dict) for item in programs + supervisors):
        return {"programs": programs, "supervisors": supervisors}
    return None


def interpret_exchange_reply(data: Dict) -> Tuple[Optional[Dict[str, List[Dict]]], str]:
    """Split an endpoint reply into (results or None, assistant text to show)."""
    results = extract_results(data)
    if results is not None:
        return results, RESULTS_ACKNOWLEDGEMENT

    message = data.get("message")
    if not isinstance(message, str):
        raise ExchangeError("Reply carried neither recommendations nor a message")
    return None, message


def compose_background_message(courses: List[str], interests: str) -> str:
    lines = ["Undergraduate courses I have completed:"]
    lines.extend(f"- {course}" for course in courses)
    lines.append("")
    lines.append(f"My research interests: {interests.strip()}")
    return "\n".join(lines)


def request_recommendations(
    client: ExchangeClient, courses: List[str], interests: str
) -> Tuple[Optional[Dict[str, List[Dict]]], str]:
    """Single-turn exchange used by the guided form: courses and interests folded into one message."""
    data = client.send_message(compose_background_message(courses, interests))
    return interpret_exchange_reply(data)


class Conversation:
    """
    Session-scoped chat state: the message log, the latest recommendations and
    the busy flag that keeps one exchange in flight at a time.
    """

    def __init__(self, client: ExchangeClient):
        self.client = client
        self._lock = threading.Lock()
        self.reset()

    def reset(self):
        self.messages: List[Dict[str, str]] = [
            {"role": "system", "content": PERSONA_MESSAGE},
            {"role": "assistant", "content": GREETING_MESSAGE},
        ]
        self.results: Optional[Dict[str, List[Dict]]] = None
        self.stage = Stage.COLLECTING_BACKGROUND
        self.is_loading = False

    def visible_messages(self) -> List[Dict[str, str]]:
        return [m for m in self.messages if m["role"] != "system"]

    def submit(self, user_text: str) -> bool:
        """Send one user turn. Returns False without doing anything when blank or busy."""
        if not user_text or not user_text.strip():
            return False

        with self._lock:
            if self.is_loading:
                return False
            self.is_loading = True

        try:
            user_message = {"role": "user", "content": user_text}
            self.messages.append(user_message)

            # Everything except system entries goes to the endpoint
            message_history = self.visible_messages()

            try:
                data = self.client.send_history(message_history)
                results, assistant_text = interpret_exchange_reply(data)
            except ExchangeError as e:
                logger.error(f"Error generating response: {e}")
                self.messages.append({"role": "assistant", "content": ERROR_MESSAGE})
                return True

            if results is not None:
                self.results = results
                self.stage = Stage.SHOWING_RESULTS
            else:
                self.stage = _NEXT_STAGE.get(self.stage, self.stage)
            self.messages.append({"role": "assistant", "content": assistant_text})
            return True
        finally:
            with self._lock:
                self.is_loading = False
