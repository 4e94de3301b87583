# Form controllers package
from resource_tracker.forms.auth import LoginForm, RegisterForm, safe_next_path
from resource_tracker.forms.profile import ProfileForm
from resource_tracker.forms.resource import ResourceForm
