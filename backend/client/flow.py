# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Signup / login / passphrase-entry flow, as driven by the site's login form.

States
------
::

    idle ──submit──▶ submitting_credentials ──▶ awaiting_passphrase
                               │                       │ submit_passphrase
                               ├──▶ success            ▼
                               └──▶ error     submitting_passphrase ──▶ success | error

* Only non-admin logins visit ``awaiting_passphrase``; the credentials are
  held client-side and sent together with the passphrase in one request.
* ``success`` schedules ``on_success`` after a short delay so the message
  stays visible before the surrounding UI closes (5 s after signup, which
  displays the one-time passphrase, 1.5 s after login).
* Errors keep every entered field.  Dismissing the passphrase popup clears
  the passphrase field and the held credentials.
* Toggling signup/login resets all fields and messages.
"""

import threading
from dataclasses import dataclass, fields as dc_fields
from enum import Enum
from typing import Callable, Optional

import httpx

from client.api import ApiError, AuthApi

SIGNUP_COMPLETE_DELAY = 5.0
LOGIN_COMPLETE_DELAY = 1.5

MSG_FIELDS_REQUIRED = "All fields are required"
MSG_LOGIN_REQUIRED = "Email and password are required"
MSG_SIGNUP_OK = "Account created successfully! Please save your passphrase:"
MSG_SIGNUP_FAILED = "Failed to create account"
MSG_LOGIN_OK = "Login successful!"
MSG_BAD_CREDENTIALS = "Invalid credentials"
MSG_BAD_PASSPHRASE = "Invalid passphrase"
MSG_UNEXPECTED = "An unexpected error occurred"


class FlowState(str, Enum):
    IDLE = "idle"
    SUBMITTING_CREDENTIALS = "submitting_credentials"
    AWAITING_PASSPHRASE = "awaiting_passphrase"
    SUBMITTING_PASSPHRASE = "submitting_passphrase"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class FormFields:
    name: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    passphrase: str = ""


def _timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class AuthFlow:
    def __init__(
        self,
        api: AuthApi,
        on_success: Callable[[], None],
        admin_email: str = "admin@zamanix.com",
        scheduler: Callable[[float, Callable[[], None]], object] = _timer_scheduler,
        on_transition: Optional[Callable[[FlowState, FlowState], None]] = None,
    ):
        self._api = api
        self._on_success = on_success
        self._admin_email = admin_email.strip().lower()
        self._schedule = scheduler
        self._on_transition = on_transition

        self.state = FlowState.IDLE
        self.is_signup = False
        self.fields = FormFields()
        self.error = ""
        self.success = ""
        self.generated_passphrase = ""
        self.session: Optional[dict] = None  # user + token once logged in
        self._held: Optional[tuple] = None   # (email, password) during passphrase step

    # -- helpers -----------------------------------------------------------

    def _go(self, new: FlowState) -> None:
        old, self.state = self.state, new
        if self._on_transition is not None and old is not new:
            self._on_transition(old, new)

    def _fail(self, message: str) -> None:
        self.error = message
        self._go(FlowState.ERROR)

    def _succeed(self, message: str, delay: float) -> None:
        self.success = message
        self._go(FlowState.SUCCESS)
        self._schedule(delay, self._on_success)

    def _clear_messages(self) -> None:
        self.error = ""
        self.success = ""

    @property
    def passphrase_prompt_open(self) -> bool:
        return self._held is not None

    # -- user input --------------------------------------------------------

    def set_field(self, name: str, value: str) -> None:
        if name not in {f.name for f in dc_fields(FormFields)}:
            raise KeyError(name)
        setattr(self.fields, name, value)
        self._clear_messages()

    def toggle_mode(self) -> None:
        self.is_signup = not self.is_signup
        self.fields = FormFields()
        self._clear_messages()
        self.generated_passphrase = ""
        self._held = None
        self._go(FlowState.IDLE)

    def dismiss_passphrase(self) -> None:
        self._held = None
        self.fields.passphrase = ""
        self._clear_messages()
        self._go(FlowState.IDLE)

    # -- submissions -------------------------------------------------------

    def submit(self) -> None:
        """The main form's submit button (signup or login)."""
        if self.state not in (FlowState.IDLE, FlowState.ERROR) or self._held is not None:
            raise RuntimeError(f"cannot submit credentials in state {self.state.value}")

        self._clear_messages()
        self._go(FlowState.SUBMITTING_CREDENTIALS)
        f = self.fields
        if self.is_signup:
            if not (f.name and f.email and f.password and f.phone):
                return self._fail(MSG_FIELDS_REQUIRED)
            return self._signup()

        if not (f.email and f.password):
            return self._fail(MSG_LOGIN_REQUIRED)
        if f.email.strip().lower() == self._admin_email:
            return self._login(f.email, f.password, None, MSG_BAD_CREDENTIALS)

        # Everyone else is asked for their passphrase before anything is sent
        self._held = (f.email, f.password)
        self._go(FlowState.AWAITING_PASSPHRASE)

    def submit_passphrase(self) -> None:
        """The passphrase popup's submit button."""
        if self._held is None or self.state not in (FlowState.AWAITING_PASSPHRASE, FlowState.ERROR):
            raise RuntimeError(f"no passphrase requested in state {self.state.value}")

        self._clear_messages()
        self._go(FlowState.SUBMITTING_PASSPHRASE)
        email, password = self._held
        self._login(email, password, self.fields.passphrase, MSG_BAD_PASSPHRASE)

    # -- requests ----------------------------------------------------------

    def _signup(self) -> None:
        f = self.fields
        try:
            data = self._api.register(f.name, f.email, f.phone, f.password)
        except ApiError:
            return self._fail(MSG_SIGNUP_FAILED)
        except httpx.HTTPError:
            return self._fail(MSG_UNEXPECTED)

        self.session = data
        self.generated_passphrase = data.get("passphrase", "")
        self._succeed(MSG_SIGNUP_OK, SIGNUP_COMPLETE_DELAY)

    def _login(self, email: str, password: str, passphrase: Optional[str], rejected: str) -> None:
        try:
            data = self._api.login(email, password, passphrase)
        except ApiError:
            return self._fail(rejected)
        except httpx.HTTPError:
            return self._fail(MSG_UNEXPECTED)

        self.session = data
        self._held = None
        self._succeed(MSG_LOGIN_OK, LOGIN_COMPLETE_DELAY)
