"""
main.py

Development entrypoint: `uvicorn main:app --reload` from the backend directory.
"""

import uvicorn

from shoreline.main import app

__all__ = ["app"]

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
