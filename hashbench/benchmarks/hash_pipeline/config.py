"""Default parameters for the hash pipeline benchmark."""

import os

# Store endpoint. HASHBENCH_HOST, HASHBENCH_PORT and HASHBENCH_PASSWORD
# override the built-in values.
DEFAULT_HOST = os.environ.get("HASHBENCH_HOST", "localhost")
DEFAULT_PORT = int(os.environ.get("HASHBENCH_PORT", "6379"))
DEFAULT_PASSWORD = os.environ.get("HASHBENCH_PASSWORD")
DEFAULT_DB = 0

# Operations queued into each pipeline (one batch per phase per trial).
DEFAULT_BATCH_SIZE = 500

# Number of write + read trials.
DEFAULT_TRIALS = 50_000

# Target key length in bytes.
DEFAULT_KEY_SIZE = 16

# Character used to pad keys up to the target length.
DEFAULT_KEY_FILLER = "A"

FIELD_PREFIX = "field:"
VALUE_PREFIX = "testValue:"
