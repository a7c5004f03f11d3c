"""
Shared constants for the patch engine and the Cordova integration.
"""

import re

# Signature of the upload build phase. Used both to skip an Apply when the
# phase already exists and to select the phases a Revert removes.
RECOGNITION_PATTERN = re.compile(r"sentry-cli\s+upload-dsym\b")

# Cheap whole-file marker consulted before any parsing happens.
PATCH_MARKER = re.compile(r"sentry-cli", re.IGNORECASE)

PHASE_LABEL = "Upload Debug Symbols to Sentry"
SHELL_PATH = "/bin/sh"
UPLOAD_SCRIPT = (
    "export SENTRY_PROPERTIES=sentry.properties\n"
    "../../plugins/cordova-plugin-sentry/node_modules/@sentry/cli/bin/sentry-cli upload-dsym"
)

FOLDER_PREFIX = "platforms"
PROPERTIES_FILENAME = "sentry.properties"
IOS_PROJECT_GLOB = "ios/*.xcodeproj/project.pbxproj"
ANY_PROJECT_GLOB = "**/*.xcodeproj/project.pbxproj"

DEFAULT_URL = "https://sentry.io/"
PLATFORM_CHOICES = ("ios", "android")
CLI_EXECUTABLE = "node_modules/@sentry/cli/bin/sentry-cli"
CONFIG_FILENAME = ".symwizard.yml"

# Directories never descended into while globbing.
IGNORED_DIRS = ("node_modules",)
