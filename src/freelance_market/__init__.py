"""
Freelance Market - project and bid lifecycle engine

Clients post projects, freelancers bid, clients accept one bid, and the
engaged pair tracks milestones and logged hours to completion.
"""

from freelance_market.marketplace import Marketplace

__version__ = "0.1.0"
__all__ = ["Marketplace", "__version__"]
