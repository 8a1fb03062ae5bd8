"""
Translation and Autocomplete Example

Translates a few sentences into Minang (each one a fresh single-turn request)
and then asks for a completion of a half-typed sentence.
"""

import asyncio

from baso import Mode, open_autocomplete
from examples._support import ConfigurationError, require_session


async def main():
    print("=== Translate Example ===\n")

    controller = require_session(Mode.TRANSLATE, language_preference="id")
    for sentence in ("Terima kasih banyak", "Saya mau pergi ke pasar"):
        await controller.submit(sentence)
        print(f"{sentence!r} -> {controller.messages[-1].content!r}")

    print("\n=== Autocomplete ===\n")
    session = open_autocomplete(transport=controller.transport)
    text = "Ambo nio pai"
    session.update(text)
    await session.settle()
    print(f"{text!r} -> {session.accept(text)!r}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ConfigurationError as exc:
        print(exc)
        raise SystemExit(2) from exc
