"""
utils/constants.py

Purpose: Centralized static content

- Enumerations of stored string values
- Default gym operating hours
- Credential email content
- Push notification defaults

(Prevents hardcoding across the codebase)
"""

# ============================================================
# STORED VALUES
# ============================================================

SUBSCRIPTION_NONE = "None"
SUBSCRIPTION_STANDARD = "Standard"
SUBSCRIPTION_PREMIUM = "Premium"

TRANSACTION_STATUS_PAID = "Paid"

PAYOUT_PENDING = "pending"
PAYOUT_APPROVED = "approved"
PAYOUT_REJECTED = "rejected"

# ============================================================
# OPERATING HOURS
# ============================================================

WEEK_DAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

WEEKDAY_HOURS = {"open": "06:00", "close": "22:00", "closed": False}
WEEKEND_HOURS = {"open": "08:00", "close": "20:00", "closed": False}

# ============================================================
# PASSWORDS
# ============================================================

RESET_PASSWORD_LENGTH = 12
RESET_PASSWORD_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789"
    "!@#$%^&*"
)

# ============================================================
# PUSH NOTIFICATIONS
# ============================================================

PUSH_ANDROID_CHANNEL = "gymvisa_notifications"
PUSH_CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"

# FCM error codes meaning the token should be pruned from the user record
PUSH_INVALID_TOKEN_CODES = ("UNREGISTERED", "INVALID_ARGUMENT")

# ============================================================
# CREDENTIAL EMAIL
# ============================================================

CREDENTIALS_EMAIL_SUBJECT = "Welcome to GymVisa - Your Account Credentials for {organization}"

CREDENTIALS_EMAIL_TEXT = """Hello {name},

An account has been created for you on GymVisa as a member of {organization}.

Email: {email}
Password: {password}

Download the GymVisa app and sign in with these credentials.
Please keep them secure and change your password after your first login.

The GymVisa Team"""

CREDENTIALS_EMAIL_HTML = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Welcome to GymVisa</title></head>
<body style="font-family: 'Segoe UI', Tahoma, sans-serif; background-color: #000000; color: #ffffff; padding: 20px;">
  <div style="max-width: 600px; margin: 0 auto; background-color: #1a1a1a; border: 1px solid #333333; border-radius: 10px; padding: 30px;">
    <h1 style="color: #B3FF13; text-align: center;">GymVisa</h1>
    <p style="color: #cccccc;">Hello {name},</p>
    <p style="color: #cccccc;">An account has been created for you as a member of
      <strong style="color: #B3FF13;">{organization}</strong>.</p>
    <div style="background-color: #2a2a2a; border: 2px solid #B3FF13; border-radius: 8px; padding: 20px;">
      <p><strong style="color: #B3FF13;">Email:</strong> <code>{email}</code></p>
      <p><strong style="color: #B3FF13;">Password:</strong> <code>{password}</code></p>
    </div>
    <p style="color: #cccccc;">Download the GymVisa app and sign in with these credentials.</p>
    <p style="color: #888888; font-size: 12px;">Please keep your login credentials secure and do not share them.
      We recommend changing your password after your first login.</p>
  </div>
</body>
</html>"""
