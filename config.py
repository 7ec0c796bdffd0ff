"""
Application Configuration

This file contains the configuration settings for the mdox Markdown viewer/editor.
It follows a modular approach to keep settings organized and easy to manage.
"""

import os

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

# --- Application Metadata ---
# Used for display purposes and as the QSettings organization name.
APP_NAME = "mdox"
APP_VERSION = "0.1.0"

# --- Session Configuration ---
# Defaults for the document session (new documents, confirmation prompts).
SESSION_SETTINGS = {
    "new_document_template": "# Untitled\n\nStart writing here.\n",
    "unsaved_changes_prompt": "You have unsaved changes. Do you want to discard them?",
}

# --- Linked Document Discovery ---
# The crawl depth is fixed; the remote delay keeps the first paint unblocked.
DISCOVERY_SETTINGS = {
    "max_depth": 2,
    "remote_delay_ms": int(os.getenv("MDOX_DISCOVERY_DELAY_MS", "500")),
}

# --- Split View Scroll Synchronisation ---
SCROLL_SYNC_SETTINGS = {
    "suppression_ms": 100,
}

# --- Recent Files ---
RECENT_FILES_SETTINGS = {
    "capacity": 10,
    "settings_key": "recent_files",
}

# --- Remote Content Fetching ---
REMOTE_SETTINGS = {
    "timeout_seconds": float(os.getenv("MDOX_REMOTE_TIMEOUT", "10")),
    "user_agent": f"{APP_NAME}/{APP_VERSION}",
}

# --- UI Preferences ---
# Persisted through QSettings; these are the fallbacks.
UI_SETTINGS = {
    "theme": "light",
    "root_directory": None,
}

# --- Logging ---
LOG_LEVEL = os.getenv("MDOX_LOG_LEVEL", "INFO")
