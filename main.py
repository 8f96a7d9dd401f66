import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from ai_orch.api.server import app

if __name__ == "__main__":
    uvicorn.run(app, host=os.getenv("AI_ORCH_HOST", "127.0.0.1"), port=int(os.getenv("AI_ORCH_PORT", "8001")))
