"""
Web 진입점

실행 방법:
    python -m web
"""

import uvicorn

from core.constants import Defaults

if __name__ == "__main__":
    uvicorn.run(
        "web.app:create_app",
        factory=True,
        host=Defaults.WEB_HOST,
        port=Defaults.WEB_PORT,
        reload=False,
    )
