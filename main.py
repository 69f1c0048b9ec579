"""Application entry point."""
# Load environment variables from .env file
from dotenv import load_dotenv
import os

load_dotenv()

import uvicorn
from api.app import create_app
from companion_policy.config import GateSettings

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
SETTINGS = GateSettings.from_env()

app = create_app(settings=SETTINGS)

if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("Companion Policy API Starting")
    print("=" * 60)
    print(f"Environment:     {ENVIRONMENT}")
    print(f"Gate store:      {SETTINGS.store_backend}")
    print(f"Min interval:    {SETTINGS.minimum_interval_ms} ms")
    print(f"Msg threshold:   {SETTINGS.messages_threshold}")
    print("=" * 60 + "\n")

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=ENVIRONMENT == "development",
        log_level="info"
    )
