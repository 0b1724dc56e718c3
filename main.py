"""Simple entrypoint to run the wardrobe stylist API locally."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "server.api:get_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        reload=False,
    )


if __name__ == "__main__":
    main()
