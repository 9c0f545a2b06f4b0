# ftl_backend/services/chat_service.py
# Keyword-based responder behind the website chat widget.
import re
import uuid

from ..models.base import db
from ..models import ChatMessage, ChatSenderEnum, Service

DEFAULT_SUGGESTIONS = [
    "What testing services do you offer?",
    "How do I submit a sample?",
    "Do you offer internships?",
    "How can I contact you?"
]

FALLBACK_REPLY = ("I'm not sure I understood that. You can ask me about our testing services, "
                  "sample submission, internships, equipment or how to reach us. "
                  "For anything else, please use the contact form and our team will get back to you.")

# (intent, keywords, reply, follow-up suggestions). Order matters: first match wins.
FAQ_INTENTS = [
    ("greeting", ("hello", "hi", "hey", "namaste", "good morning", "good afternoon"),
     "Hello! I'm the FTL assistant. How can I help you with food testing today?",
     DEFAULT_SUGGESTIONS),
    ("sample_submission", ("sample", "submit", "submission", "courier", "drop off"),
     "To submit samples, raise a service request from the Services page with the sample type and count. "
     "Our team will confirm the quantity needed, packaging requirements and the expected turnaround time.",
     ["What testing services do you offer?", "How long does testing take?"]),
    ("turnaround", ("turnaround", "how long", "report", "results", "time"),
     "Most routine tests are reported within 3 to 7 working days. Turnaround for each service is listed in our catalogue.",
     ["What testing services do you offer?", "How do I submit a sample?"]),
    ("internship", ("intern", "internship", "training", "student", "career", "job"),
     "We offer internships in food microbiology, chemistry and instrumentation. "
     "Open positions are listed on the Internships page, where you can apply with your resume.",
     ["What equipment do you have?", "How can I contact you?"]),
    ("equipment", ("equipment", "instrument", "hplc", "gc-ms", "icp", "machine"),
     "Our laboratory is equipped with modern analytical instruments. Browse the Equipment page for the full list and specifications.",
     ["What testing services do you offer?"]),
    ("accreditation", ("nabl", "accredit", "certif", "fssai", "iso"),
     "We follow ISO/IEC 17025 practices and our reports are accepted for regulatory submissions. Ask us for the current scope of accreditation.",
     ["What testing services do you offer?", "How can I contact you?"]),
    ("pricing", ("price", "cost", "fee", "quote", "quotation", "charges"),
     "Pricing depends on the parameters and number of samples. Raise a service request and we will send you a quotation.",
     ["How do I submit a sample?"]),
    ("contact", ("contact", "phone", "email", "address", "location", "where", "reach", "hours", "open"),
     "You can reach us through the contact form on this website. Our team responds on working days, Monday to Saturday, 9:30 AM to 6:00 PM.",
     ["How do I submit a sample?", "Do you offer internships?"]),
]

SERVICE_KEYWORDS = ("service", "test", "testing", "analysis", "analyse", "analyze", "offer")


def normalize(text):
    return re.sub(r'\s+', ' ', text.lower()).strip()


def match_intent(message):
    """Returns the first FAQ intent whose keywords appear in the message, or None."""
    text = normalize(message)
    words = set(re.findall(r"[a-z0-9\-]+", text))
    for intent, keywords, reply, suggestions in FAQ_INTENTS:
        for keyword in keywords:
            if (' ' in keyword and keyword in text) or keyword in words or (len(keyword) > 4 and keyword in text):
                return intent, reply, suggestions
    return None


def describe_services(message):
    """Builds a reply from the active catalogue when the visitor asks about services."""
    text = normalize(message)
    if not any(keyword in text for keyword in SERVICE_KEYWORDS):
        return None
    services = Service.query.filter_by(is_active=True).order_by(Service.display_order, Service.name).all()
    if not services:
        return ("We offer food safety and quality testing, including microbiological, chemical and nutritional analysis. "
                "Raise a service request to tell us what you need tested.")
    matching = [s for s in services if s.name.lower() in text or (s.category and s.category.lower() in text)]
    if matching:
        service = matching[0]
        details = service.short_description or service.description or ''
        turnaround = f" Typical turnaround: {service.turnaround_time}." if service.turnaround_time else ''
        return f"{service.name}: {details}{turnaround}".strip()
    names = ', '.join(s.name for s in services[:8])
    return f"Our testing services include: {names}. Ask me about any of them for details."


def build_reply(message):
    """Returns (reply, suggestions) for a visitor message."""
    service_reply = describe_services(message)
    intent = match_intent(message)
    if service_reply and (intent is None or intent[0] in ('greeting', 'contact', 'turnaround')):
        return service_reply, ["How do I submit a sample?", "How long does testing take?"]
    if intent:
        return intent[1], intent[2]
    if service_reply:
        return service_reply, ["How do I submit a sample?"]
    return FALLBACK_REPLY, DEFAULT_SUGGESTIONS


def new_session_id():
    return uuid.uuid4().hex


def handle_message(message, session_id=None):
    """
    Stores the visitor message and the bot reply for the session.
    The caller commits or rolls back.
    """
    session_id = session_id or new_session_id()
    reply, suggestions = build_reply(message)
    db.session.add(ChatMessage(session_id=session_id, sender=ChatSenderEnum.USER, message=message))
    db.session.add(ChatMessage(session_id=session_id, sender=ChatSenderEnum.BOT, message=reply))
    return {"session_id": session_id, "reply": reply, "suggestions": suggestions}


def get_history(session_id):
    messages = ChatMessage.query.filter_by(session_id=session_id).order_by(ChatMessage.created_at, ChatMessage.id).all()
    return [m.to_dict() for m in messages]
