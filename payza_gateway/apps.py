from django.apps import AppConfig
from edx_django_utils.plugins import PluginURLs, PluginSettings

# Same value as openedx ProjectType.LMS, without importing edx-platform.
LMS = "lms.djangoapp"


class PayzaGatewayConfig(AppConfig):
    name = "payza_gateway"
    label = "payza_gateway"
    verbose_name = "Payza Gateway"
    default_auto_field = "django.db.models.BigAutoField"

    plugin_app = {
        PluginURLs.CONFIG: {
            LMS: {
                PluginURLs.NAMESPACE: "payza_gateway",
                PluginURLs.REGEX: r"^payza/",
                PluginURLs.RELATIVE_PATH: "urls",
            }
        },
        # ENV_TOKENS -> settings.PAYZA_*
        PluginSettings.CONFIG: {
            LMS: {
                "common": {PluginSettings.RELATIVE_PATH: "settings.common"},
            },
        },
    }
