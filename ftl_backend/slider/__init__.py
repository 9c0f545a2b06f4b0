# ftl_backend/slider/__init__.py
from .timers import Scheduler, TimerHandle, ThreadingScheduler, ManualScheduler
from .carousel import Carousel
