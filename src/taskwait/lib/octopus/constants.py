import os

OCTOPUS_URL = os.getenv("OCTOPUS_URL", "")
OCTOPUS_API_KEY = os.getenv("OCTOPUS_API_KEY", "")
OCTOPUS_SPACE = os.getenv("OCTOPUS_SPACE", "Spaces-1")
OCTOPUS_REQUEST_TIMEOUT = int(os.getenv("OCTOPUS_REQUEST_TIMEOUT", "30"))

API_KEY_HEADER = "X-Octopus-ApiKey"
NEXT_PAGE_LINK = "Page.Next"
