# This file makes the 'commands' directory a Python package
# Importing command modules from here

from . import init
from . import snap
from . import restore
from . import log
from . import config
