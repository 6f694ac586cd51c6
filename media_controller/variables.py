from typing import Optional
from .controller import PlaybackController

# INITIALISED IN THE LIFESPAN OF main.app, ONE CONTROLLER DRIVES ONE PLAYER
controller: Optional[PlaybackController] = None
