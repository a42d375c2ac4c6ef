"""Issue lifecycle, priority and user role constants."""

PRIORITIES = ('low', 'medium', 'high', 'urgent')
DEFAULT_PRIORITY = 'medium'

# Issue status lifecycle: pending -> in_progress -> completed
STATUS_PENDING = 'pending'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_COMPLETED = 'completed'
STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)

ROLE_CITIZEN = 'citizen'
ROLE_WORKER = 'worker'
ROLE_ADMIN = 'admin'

# Worker availability
WORKER_AVAILABLE = 'available'
WORKER_BUSY = 'busy'
