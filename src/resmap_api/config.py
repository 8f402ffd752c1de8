import os
from dotenv import load_dotenv

# load .env if present
load_dotenv()

# Grid scans run in-process by default; >1 (or -1 for all cores) fans rows out via joblib
N_JOBS = int(os.getenv("RESMAP_N_JOBS", "1"))

# Upper bound on cells a single /scan request may evaluate
MAX_GRID_CELLS = int(os.getenv("RESMAP_MAX_GRID_CELLS", "250000"))

LOG_LEVEL = os.getenv("RESMAP_LOG_LEVEL", "INFO").upper()
