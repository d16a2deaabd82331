"""Minimal demonstration of the checkup assistant in demo mode."""

import asyncio

from checkup_assistant import AssistantSession


async def main() -> None:
    session = AssistantSession.create()
    session.set_age(34)
    print("Profile:", session.age_profile()["title"])
    for question in session.quick_questions()[:3]:
        result = await session.chat(question)
        print("User:", question)
        print("Assistant:", result["assistant_message"]["content"])


if __name__ == "__main__":
    asyncio.run(main())
