"""Liquid templates for the login code email."""

OTP_SUBJECT = "Your Zerah login code"

OTP_TEXT_TEMPLATE = """Zerah - login code

Your login code: {{ code }}

This code is valid for {{ ttl_minutes }} minutes.

If you did not request this code, you can safely ignore this email.
"""

OTP_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"></head>
  <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="color: #667eea;">Zerah</h1>
    <h2>Sign in to your account</h2>
    <p>Here is your login code. It is valid for <strong>{{ ttl_minutes }} minutes</strong>.</p>
    <div style="border: 2px solid #667eea; border-radius: 8px; padding: 20px; text-align: center;">
      <span style="font-size: 32px; font-weight: bold; letter-spacing: 8px;">{{ code }}</span>
    </div>
    <p>If you did not request this code, you can safely ignore this email.</p>
    <p style="color: #6b7280; font-size: 14px;">&copy; {{ year }} Zerah</p>
  </body>
</html>
"""
