import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("patients", "0001_initial"),
        ("specialists", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MedicalHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("patient_comments", models.TextField(blank=True, default="")),
                ("specialist_observations", models.TextField(blank=True, default="")),
                ("recommendations", models.TextField(blank=True, default="")),
                ("diet", models.TextField(blank=True, default="")),
                ("shopping_list", models.TextField(blank=True, default="")),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="histories",
                        to="patients.patient",
                    ),
                ),
                (
                    "specialist",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="histories",
                        to="specialists.specialist",
                    ),
                ),
            ],
            options={
                "db_table": "histories_medical_history",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
