"""Application entrypoint."""

import uvicorn


def main() -> None:
    """Serve the API with uvicorn.

    Returns
    -------
    None
        Blocks until the server exits.
    """
    uvicorn.run("meditrack.main:app", host="0.0.0.0", port=4000)


if __name__ == "__main__":
    main()
