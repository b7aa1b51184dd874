import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(db_index=True, max_length=128)),
                ("description", models.TextField(blank=True, default="")),
                ("affected_table", models.CharField(blank=True, default="", max_length=64)),
                ("record_id", models.CharField(blank=True, default="", max_length=64)),
                ("occurred_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "actor_user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="audit_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "audit_entry",
                "ordering": ["-occurred_at", "-id"],
                "indexes": [
                    models.Index(fields=["actor_user", "occurred_at"], name="audit_actor_occurred_idx"),
                    models.Index(fields=["affected_table", "record_id"], name="audit_table_record_idx"),
                ],
            },
        ),
    ]
