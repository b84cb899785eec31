DEFAULTS = {
    "PAYZA_ENABLED": False,
    "PAYZA_ENVIRONMENT": "sandbox",
    "PAYZA_SANDBOX_EMAIL": "",
    "PAYZA_LIVE_EMAIL": "",
    "PAYZA_IPN_CONFIGURED": False,
    "PAYZA_DEBUG": False,
    "PAYZA_TITLE": "Payza",
    "PAYZA_DESCRIPTION": "Pay via Payza; you can pay with your credit card if you don't have a Payza account",
    "PAYZA_ALERT_URL": "",
}


def plugin_settings(settings):
    tokens = getattr(settings, "ENV_TOKENS", {})
    for name, default in DEFAULTS.items():
        setattr(settings, name, tokens.get(name, getattr(settings, name, default)))
