from timetracker.fastapi.schemas.user import (
    CamelModel,
    EmployeeCreate,
    UserRead,
    LoginRequest,
    TokenResponse,
    MessageResponse
)
from timetracker.fastapi.schemas.time_record import (
    DateRange,
    TimerStart,
    PauseAction,
    ManualEntryCreate,
    TimeRecordRead,
    RecordQuery
)
from timetracker.fastapi.schemas.dashboard import (
    AdminDashboardStats,
    EmployeeDashboardStats
)
