from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("provisioning", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="panelcredentials",
            name="xui_api_base_url",
            field=models.URLField(blank=True, verbose_name="XUI One API URL"),
        ),
        migrations.AddField(
            model_name="panelcredentials",
            name="xui_api_access_code",
            field=models.CharField(blank=True, max_length=100, verbose_name="XUI One Access Code"),
        ),
        migrations.AddField(
            model_name="panelcredentials",
            name="encrypted_xui_api_key",
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name="panelcredentials",
            name="vplay_integration_url",
            field=models.URLField(blank=True, verbose_name="VPlay Integration URL"),
        ),
        migrations.AddField(
            model_name="panelcredentials",
            name="vplay_key_message",
            field=models.CharField(
                blank=True, help_text="Sent as `key`; XCLOUD when blank", max_length=100, verbose_name="VPlay Key Message"
            ),
        ),
    ]
