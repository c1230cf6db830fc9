"""Static metadata describing EcoTrivia."""

APP_NAME = "EcoTrivia"
APP_VERSION = "0.1.0"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "EcoTrivia is a quiz game about recycling, energy, climate and nature. "
    "Create a room, invite friends from the lobby and race the clock for a time bonus."
)
