"""HTTP-facing pieces: alias pointers, request monitoring and the FastAPI app.

The app itself lives in :mod:`covidchart.api.app` and is not imported here.
"""
