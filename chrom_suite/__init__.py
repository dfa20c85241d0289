"""ChromSuite"""

from datetime import datetime


__version__ = "0.1.0"
__year__ = datetime.now().year
__authors__ = ["ChromSuite developers"]
