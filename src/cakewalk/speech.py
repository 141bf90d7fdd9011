from __future__ import annotations

import calendar

from cakewalk.models import BirthDate, NextOccurrence

BIRTHDAY_PROMPT = "When is your birthday?"
BIRTHDAY_REPROMPT = "I was born on November sixth, twenty fourteen. When were you born?"
GOODBYE = "Goodbye!"
SERVICE_PROBLEM = "There was a problem connecting to the service."
DID_NOT_UNDERSTAND = "Sorry, I can't understand the command. Please say again."

TODAY_TEMPLATE = "Happy {age}{suffix} birthday!"
COUNTDOWN_TEMPLATE = "Welcome back. It looks like there {verb} {days} {unit} until your {age}{suffix} birthday."
CAPTURED_TEMPLATE = "Thanks, I'll remember that you were born on {month} {day} of {year}."
INVALID_BIRTHDAY_TEMPLATE = "Sorry, {reason} Please tell me the month, day and year you were born."


def ordinal_suffix(number: int) -> str:
    if 10 <= number % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def render_welcome(skill_name: str) -> str:
    return f"Welcome to {skill_name}. {BIRTHDAY_PROMPT}"


def render_help(skill_name: str) -> str:
    return (
        f"{skill_name} counts down the days to your next birthday. "
        "Tell me when you were born by saying something like, I was born on June fifteenth, nineteen ninety. "
        "After that, just open the skill or ask how long until my birthday."
    )


def render_fallback() -> str:
    return "Hmm, I'm not sure about that. You can tell me your birthday, or say help. What would you like to do?"


def render_countdown(result: NextOccurrence) -> str:
    suffix = ordinal_suffix(result.age_reached)
    if result.is_today:
        return TODAY_TEMPLATE.format(age=result.age_reached, suffix=suffix)

    singular = result.days_until == 1
    return COUNTDOWN_TEMPLATE.format(
        verb="is" if singular else "are",
        days=result.days_until,
        unit="day" if singular else "days",
        age=result.age_reached,
        suffix=suffix,
    )


def render_captured(birth_date: BirthDate) -> str:
    return CAPTURED_TEMPLATE.format(
        month=calendar.month_name[birth_date.month],
        day=birth_date.day,
        year=birth_date.year,
    )


def render_invalid_birthday(stored: bool = False) -> str:
    if stored:
        reason = "I couldn't make sense of the birthday I have on file."
    else:
        reason = "that doesn't sound like a real date."
    return INVALID_BIRTHDAY_TEMPLATE.format(reason=reason)
