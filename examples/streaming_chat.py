"""
Streaming Chat Example

Holds a short multi-turn chat with Baso and prints each assistant reply as
its fragments arrive.
"""

import asyncio

from baso import ConversationSnapshot, MessageStatus, Mode
from examples._support import ConfigurationError, require_session


class _Printer:
    """Prints only the text added since the previous snapshot."""

    def __init__(self):
        self.printed = 0

    def __call__(self, snapshot: ConversationSnapshot):
        pending = snapshot.pending
        if pending is None:
            return
        print(pending.content[self.printed :], end="", flush=True)
        self.printed = len(pending.content)


async def main():
    print("=== Streaming Chat Example ===\n")

    controller = require_session(Mode.CHAT)
    printer = _Printer()
    controller.subscribe(printer)

    for prompt in ("Assalamualaikum Sanak! Baa kaba?", "Apo arti 'ota lamak'?"):
        print(f"User: {prompt}\n")
        print("Baso: ", end="", flush=True)
        printer.printed = 0
        await controller.submit(prompt)
        last = controller.messages[-1]
        if last.status is MessageStatus.FAILED:
            print(last.content, end="")
        print("\n")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ConfigurationError as exc:
        print(exc)
        raise SystemExit(2) from exc
