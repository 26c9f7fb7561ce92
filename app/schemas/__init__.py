# Schemas package (re-export feature modules for stable imports)
from .auth.auth import *
from .analysis.analysis import *
from .history.history import *
from .common.common import *
