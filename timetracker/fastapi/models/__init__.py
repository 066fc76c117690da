from timetracker.fastapi.models.user import User, UserRole
from timetracker.fastapi.models.time_record import TimeRecord, RecordState
from timetracker.fastapi.models.counter import Counter
