# FastAPI 메인 엔트리포인트
import os
import logging
from app.main import app

logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8080))
    print(f"Starting multi-board server on port: {port}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="warning"
    )
