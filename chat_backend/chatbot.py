import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from chat_backend.config import AdvisorSettings


system_prompt_advisor = """# Your Role
You are a helpful academic advisor for prospective postgraduate physics students.
Your goal is to recommend the most suitable postgraduate programmes and supervisors at the University of Cambridge, based on two user inputs:
1) the specific physics or science-related undergraduate courses the student has completed (minimum 4, maximum 10), and
2) their future research interests within physics.

Use the programme list from https://www.phy.cam.ac.uk/study/postgraduate/ and match these with the student's background and interests.
Also suggest suitable supervisors by referencing research areas and staff listed at https://www.phy.cam.ac.uk/people/.

# Conversation Flow
Until the student has shared at least 4 undergraduate courses, keep asking for them.
Once you have the courses, ask about their research interests.
Recommend supervisors only for PhD programmes and not for masters. For masters just state the relevant programme.
If the user's inputs are too general, ask clarifying questions to narrow down the field
(e.g., 'Are you interested in quantum optics or condensed matter?' or 'Did you take any lab-based or computational courses?').

# Your Recommendations
Your recommendations must include:
- Programme Name (as listed on the website)
- A short reason why it's a good fit, based on courses and research interest
- 2-3 suitable supervisors aligned with that research theme
- Links to both the programme and supervisor profile pages (if available)

# Response Format
While you are still gathering information or answering follow-up questions, reply in plain text.
Always be clear, friendly, and concise in your tone. Use bullet points where helpful.

When you have both the courses and the research interests and are ready to recommend, reply with ONLY a JSON object
and no other text, in exactly this shape:

{
  "programs": [
    {"name": "...", "description": "...", "url": "...", "supervisors": ["...", "..."]}
  ],
  "supervisors": [
    {"name": "...", "department": "...", "researchArea": "...", "url": "..."}
  ]
}

The "description" of a programme is the short reason it fits the student.
The "supervisors" list inside a programme is empty for masters programmes.
"""


# ----------------------------------------------------
# API Models for Exchange Requests and Responses
# ----------------------------------------------------
class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    role: Role
    content: str


class Program(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    url: str = ""
    supervisors: List[str] = Field(default_factory=list)

    # Models send null for optional fields they have nothing for
    @field_validator("description", "url", mode="before")
    @classmethod
    def _none_as_empty_text(cls, value):
        return "" if value is None else value

    @field_validator("supervisors", mode="before")
    @classmethod
    def _none_as_no_supervisors(cls, value):
        return [] if value is None else value


class Supervisor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    department: str = Field("", validation_alias=AliasChoices("department", "university"))
    research_area: str = Field(
        "",
        validation_alias=AliasChoices("researchArea", "research_area", "research", "field"),
        serialization_alias="researchArea",
    )
    description: str = ""
    url: str = ""

    @field_validator("department", "research_area", "description", "url", mode="before")
    @classmethod
    def _none_as_empty_text(cls, value):
        return "" if value is None else value


class RecommendationResult(BaseModel):
    programs: List[Program]
    supervisors: List[Supervisor]


class InvalidChatRequest(ValueError):
    """Raised when a request body carries neither a usable history nor a single message."""


_history_adapter = TypeAdapter(List[ChatMessage])


def parse_chat_request(body: Any) -> List[ChatMessage]:
    """
    Turn a request body into the conversation history sent to the model.

    Accepts {"messages": [...]} or the single-turn form {"message": "..."}.
    Client-held system entries are dropped; the server owns the system prompt.
    """
    if not isinstance(body, dict):
        raise InvalidChatRequest("Request body must be a JSON object")

    raw_messages = body.get("messages")
    if raw_messages is not None:
        try:
            history = [
                m for m in _history_adapter.validate_python(raw_messages)
                if m.role != Role.SYSTEM
            ]
        except ValidationError:
            history = []
        if history:
            return history

    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return [ChatMessage(role=Role.USER, content=message)]

    raise InvalidChatRequest("A non-empty 'messages' list or 'message' string is required")


# ----------------------------------------------------
# Exchange handler
# ----------------------------------------------------
class Chatbot:
    def __init__(self, generation_client, settings: AdvisorSettings, logger):
        self.generation_client = generation_client
        self.GENERATION_MODEL_ID = settings.generation_model_id
        self.temperature = settings.temperature
        self.max_tokens = settings.max_tokens
        self.logger = logger

    def build_messages(self, history: List[ChatMessage]) -> List[Dict[str, str]]:
        messages = [{"role": Role.SYSTEM.value, "content": system_prompt_advisor}]
        messages.extend({"role": m.role.value, "content": m.content} for m in history)
        return messages

    def chat(self, history: List[ChatMessage]) -> Dict[str, Any]:
        """Send the history to the completion API and return the client-facing reply body."""
        messages = self.build_messages(history)
        self.logger.info(f"Processing exchange with {len(history)} history messages")

        try:
            chat_response = self.generation_client.chat.completions.create(
                model=self.GENERATION_MODEL_ID,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            reply_text = chat_response.choices[0].message.content or ""
        except Exception as e:
            self.logger.error(f"Error generating response: {e}")
            raise

        self.logger.info(f"Generated response obtained: {reply_text[:500]}...")
        return self.interpret_reply(reply_text)

    def interpret_reply(self, reply_text: str) -> Dict[str, Any]:
        """
        Sniff the model reply for a JSON payload.

        Replies starting with '{' that parse into a well-formed recommendation
        are returned as {"programs": [...], "supervisors": [...]}. Everything
        else, including JSON that fails to parse or has another shape, comes
        back as {"message": reply_text} with the text untouched.
        """
        if not reply_text.strip().startswith("{"):
            return {"message": reply_text}

        try:
            parsed = json.loads(reply_text)
        except json.JSONDecodeError as e:
            self.logger.info(f"Reply looked like JSON but did not parse ({e}); returning as text")
            return {"message": reply_text}

        if isinstance(parsed, dict):
            if "programs" in parsed and "supervisors" in parsed:
                try:
                    result = RecommendationResult.model_validate(parsed)
                except ValidationError as e:
                    self.logger.warning(f"Recommendation payload failed validation: {e}")
                    return {"message": reply_text}
                self.logger.info(
                    f"Parsed recommendations: {len(result.programs)} programs, "
                    f"{len(result.supervisors)} supervisors"
                )
                return result.model_dump(by_alias=True)

            if isinstance(parsed.get("message"), str):
                return {"message": parsed["message"]}

        self.logger.info("Reply parsed as JSON of an unexpected shape; returning as text")
        return {"message": reply_text}


def verify_api_key(generation_client, logger) -> Optional[List[str]]:
    """Startup key check: list the models visible to the configured key. Never raises."""
    try:
        models = generation_client.models.list()
        model_ids = [m.id for m in models.data]
        logger.info(f"OpenAI API key is valid; {len(model_ids)} models available")
        return model_ids
    except Exception as e:
        logger.exception(f"OpenAI API key check failed: {e}")
        return None
