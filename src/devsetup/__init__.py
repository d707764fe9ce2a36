# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# Keep this in the form "<major>.<minor>.<patch>"; it is what gets recorded
# in the version marker after a successful run.
__version__ = "1.3.10"
LAST_UPDATED = "2022-08-21"
