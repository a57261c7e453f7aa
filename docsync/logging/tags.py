# docsync/logging/tags.py
"""
Subsystem tags prefixed to log messages.

Keeps log output greppable per subsystem. Changing a tag here updates it
project-wide.
"""

STATE = "[STATE]"
DETECT = "[DETECT]"
SCAN = "[SCAN]"
WATCH = "[WATCH]"
SYNC = "[SYNC]"
TRANSFORM = "[TRANSFORM]"
CLI = "[CLI]"
