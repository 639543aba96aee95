# examples/E01_console_concierge.py
"""
Example: Console Concierge
--------------------------
Runs a full voice-concierge session in the terminal. Typed lines stand in for
speech and replies are printed instead of spoken, so the whole turn loop
(listen, resolve, act, speak) runs without audio hardware.

To Run:
1. Ensure verona-voice is installed (`poetry install --extras test`).
2. Set your Google API key as an environment variable:
   `export GOOGLE_API_KEY="your_google_api_key"`
3. Run from the root of the project:
   `poetry run python examples/E01_console_concierge.py`

Try "recommend a summer dress", then "add it to the cart", then
"take me to checkout". Type "quit" to end the session.
"""
import asyncio
import logging
import os
from typing import Optional

from verona_voice.concierge import Concierge
from verona_voice.config.features import FeatureSettings
from verona_voice.config.models import ConciergeConfig


async def run_console_concierge_demo():
    print("--- Verona Voice Console Concierge ---")

    if not (os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY")):
        print("WARNING: GOOGLE_API_KEY is not set. The concierge will answer with its 'API key is missing' message.")

    loop = asyncio.get_running_loop()
    quit_requested = asyncio.Event()

    def read_utterance(prompt: str) -> str:
        line = input(prompt)
        if line.strip().lower() in {"quit", "exit"}:
            loop.call_soon_threadsafe(quit_requested.set)
            return ""
        return line

    app_config = ConciergeConfig(
        features=FeatureSettings(
            llm="gemini",
            speech_input="console",
            speech_output="console",
        ),
        speech_input_configurations={"console_input": {"input_func": read_utterance}},
        default_log_level="WARNING",
    )

    def navigate(path: str) -> None:
        print(f"[navigate] {path}")

    concierge: Optional[Concierge] = None
    try:
        concierge = await Concierge.create(config=app_config, navigate=navigate)
        concierge.subscribe_status(lambda status: print(f"[status] {status.message}") if status else None)
        await concierge.open()
        await quit_requested.wait()
        await concierge.close()

        print("\nCart contents:")
        for item in concierge.cart.items:
            print(f"  {item['quantity']} x {item['name']} ({item['price']:.2f})")
        print(f"Conversation had {len(concierge.history)} messages.")
    except Exception as e:
        print(f"\nAn error occurred: {e}")
        logging.exception("Console concierge error details:")
    finally:
        if concierge:
            await concierge.teardown()
            print("Concierge torn down.")

if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    # logging.getLogger("verona_voice").setLevel(logging.DEBUG)
    asyncio.run(run_console_concierge_demo())
