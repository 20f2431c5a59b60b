"""SpeakSmart Backend.

Course marketplace backend: instructors propose classes, administrators
approve them, students select and pay for approved classes, and a
confirmed payment turns a selection into an enrollment.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
