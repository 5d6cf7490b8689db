# barbershop/chat.py

"""Scripted chat assistant: keyword lookup over a fixed table."""

import re
from typing import Optional

from .data import shop_settings
from .lifecycle import AppointmentLifecycle
from .roles import Actor

ARABIC = re.compile("[\u0600-\u06FF]")

_location = shop_settings["location"]
_hours = shop_settings["hours"]
_prices = ", ".join(f"{name} ({price})" for name, price in shop_settings["prices"].items())
_prices_ar = "، ".join(f"{name} ({price})" for name, price in shop_settings["prices"].items())

KNOWLEDGE_BASE = [
    {
        "keywords": ["حجز", "موعد", "book", "appointment", "reserve", "احجز"],
        "en": "You can book an appointment easily from your Dashboard! Just log in and select "
              "your preferred service, date, and time.",
        "ar": "يمكنك حجز موعد بسهولة من لوحة التحكم (Dashboard)! فقط قم بتسجيل الدخول واختر الخدمة والتاريخ والوقت المفضل لديك.",
    },
    {
        "keywords": ["سعر", "اسعار", "price", "cost", "how much", "بكم"],
        "en": f"Our services include: {_prices}. Check our Services page for full details!",
        "ar": f"خدماتنا تشمل: {_prices_ar}. يمكنك مراجعة صفحة الخدمات للتفاصيل!",
    },
    {
        "keywords": ["وقت", "ساعة", "مفتوح", "متى", "hours", "time", "open", "schedule", "اي ساعة"],
        "en": f"We are open: {_hours['weekdays']}, {_hours['saturday']}, and {_hours['sunday']}.",
        "ar": f"نفتح في الأوقات التالية: {_hours['weekdays']}، {_hours['saturday']}، و {_hours['sunday']}.",
    },
    {
        "keywords": ["مكان", "عنوان", "فرع", "دمشق", "سوريا", "location", "address", "damascus", "syria", "وين"],
        "en": f"We are located in {_location['city']}, {_location['country']}! "
              f"Our address is {_location['address']}.",
        "ar": f"موقعنا في {_location['country']}، {_location['city']}! عنواننا هو {_location['address']}.",
    },
    {
        "keywords": ["مساعدة", "بوت", "help", "assistant"],
        "en": "I am your EliteCuts assistant! I can help with booking, prices, location, and hours. "
              "What's on your mind?",
        "ar": "أنا مساعد EliteCuts الذكي! يمكنني مساعدتك بخصوص الحجز، الأسعار، الموقع، وأوقات العمل. ماذا يدور في ذهنك؟",
    },
]

# checked before the table
NEXT_APPOINTMENT_KEYWORDS = ("موعدي", "appointment", "next")

FALLBACK = (
    "I'm sorry, I don't have information on that yet. You can try asking about 'prices', "
    "'booking', or 'location'. \n\nعذراً، ليس لدي معلومات عن هذا بعد. يمكنك سؤالي عن 'الأسعار'، 'الحجز'، أو 'الموقع'."
)


def is_arabic(text: str) -> bool:
    return bool(ARABIC.search(text))


def welcome(actor: Optional[Actor] = None) -> str:
    if actor is not None and actor.email:
        name = actor.email.split("@")[0]
        return (
            f"Welcome back, {name}! How can I help you with your next appointment today? "
            f"\n\nأهلاً بعودتك يا {name}! كيف يمكنني مساعدتك في موعدك القادم اليوم؟"
        )
    return (
        "Welcome to EliteCuts! I'm your AI assistant. How can I help you today? "
        "\n\nأهلاً بك في EliteCuts! أنا مساعدك الذكي. كيف يمكنني مساعدتك اليوم؟"
    )


def match_knowledge(text: str) -> Optional[str]:
    lowered = text.lower()
    arabic = is_arabic(text)
    for entry in KNOWLEDGE_BASE:
        if any(keyword in lowered for keyword in entry["keywords"]):
            return entry["ar"] if arabic else entry["en"]
    return None


async def reply(text: str, actor: Optional[Actor] = None, lifecycle: Optional[AppointmentLifecycle] = None) -> str:
    lowered = text.lower()
    arabic = is_arabic(text)

    if any(keyword in lowered for keyword in NEXT_APPOINTMENT_KEYWORDS):
        if actor is None or actor.id is None or lifecycle is None:
            if arabic:
                return "عذراً، لا يمكنني التحقق من مواعيدك بدون تسجيل الدخول. يرجى تسجيل الدخول أولاً."
            return "Sorry, I can't check your appointments without you being logged in. Please log in first."

        upcoming = await lifecycle.next_appointment(actor)
        if upcoming is None:
            if arabic:
                return "ليس لديك أي مواعيد قادمة. يمكنك حجز موعد جديد من لوحة التحكم."
            return "You don't have any upcoming appointments. You can book a new one from your Dashboard."

        when = f"{upcoming.appointment_date:%B} {upcoming.appointment_date.day}, {upcoming.appointment_date.year}"
        if arabic:
            return f"موعدك القادم هو: {upcoming.service_type} في {when} الساعة {upcoming.appointment_time}."
        return f"Your next appointment is: {upcoming.service_type} on {when} at {upcoming.appointment_time}."

    return match_knowledge(text) or FALLBACK
