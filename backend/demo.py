"""Create a demo session for development/testing."""

import asyncio
import shutil

from backend.host import deliver_message, start_session
from portrait_stage.models import IncomingMessage, StageConfig
from portrait_stage.storage import Storage

DEMO_SESSION = "demo"

DEMO_MESSAGES = [
    {"role": "user", "text": "I push open the door of the guild hall."},
    {
        "role": "assistant",
        "author": {"name": "Narrator"},
        "text": "The hall falls quiet as you enter.\n"
        "> **Amelie:** Another one. How tiresome.\n"
        "Lena – Oi! Don't mind her, love.\n"
        "Your purse feels lighter already: C 1,250",
    },
    {
        "role": "assistant",
        "author": {"name": "Nami"},
        "text": "A red-haired navigator eyes your coin pouch with open interest.",
    },
]


async def _populate(storage: Storage) -> None:
    config = StageConfig(fallback_to_author=True, initial_speakers=["Lilith"])
    await start_session(storage, DEMO_SESSION, config, title="Guild Hall Demo", bot_name="Narrator")
    for raw in DEMO_MESSAGES:
        await deliver_message(storage, DEMO_SESSION, IncomingMessage.model_validate(raw))


def create_demo_data(storage: Storage) -> None:
    """Wipe existing sessions and create a fresh demo session."""
    sessions_root = storage.sessions_dir
    if sessions_root.exists():
        shutil.rmtree(sessions_root)
    sessions_root.mkdir(parents=True, exist_ok=True)

    asyncio.run(_populate(storage))

    print(f"Created demo session '{DEMO_SESSION}' with {len(DEMO_MESSAGES)} messages.")
