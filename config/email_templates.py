"""
Email templates for notification delivery.
"""

# Header colour and icon per notification priority
PRIORITY_STYLES = {
    'low': {'color': '#6B7280', 'icon': 'ℹ️'},
    'medium': {'color': '#575C9E', 'icon': '📢'},
    'high': {'color': '#DC2626', 'icon': '⚠️'},
}

ACTION_BUTTON_TEMPLATE = """<a href="{action_url}" style="display:inline-block;background:{color};color:#ffffff;text-decoration:none;padding:12px 30px;border-radius:6px;font-weight:600;margin-top:10px;">{action_label}</a>"""

# Notification email, rendered with str.format
NOTIFICATION_EMAIL_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Arial,sans-serif;line-height:1.6;color:#333;margin:0;padding:0;background-color:#f5f5f5;">
  <div style="max-width:600px;margin:20px auto;background:#ffffff;border-radius:10px;overflow:hidden;">
    <div style="background:{color};color:#ffffff;padding:30px 20px;text-align:center;">
      <h1 style="margin:0;font-size:24px;">DeskInspect</h1>
      <p style="margin:5px 0 0 0;font-size:14px;">Thesis Evaluation System</p>
    </div>
    <div style="padding:30px 20px;">
      <div style="font-size:20px;font-weight:600;color:#1f2937;margin:0 0 15px 0;">{icon} {title}</div>
      <div style="font-size:15px;color:#4b5563;margin:0 0 20px 0;">{message}</div>
      {action_button}
    </div>
    <div style="background:#f9fafb;padding:20px;text-align:center;font-size:13px;color:#6b7280;border-top:1px solid #e5e7eb;">
      <p>This is an automated notification from DeskInspect.</p>
      <p>You received this email because you have email notifications enabled in your profile settings.</p>
      <p style="margin:10px 0 0 0;font-size:12px;">&copy; {year} DeskInspect. All rights reserved.</p>
    </div>
  </div>
</body>
</html>
"""

NOTIFICATION_TEXT_TEMPLATE = """{title}

{message}
{action_line}
--
This is an automated notification from DeskInspect.
"""
