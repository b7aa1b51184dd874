# backend/clinic_core/common/management/commands/ensure_roles.py
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from clinic_core.common.permissions import ROLE_PRECEDENCE


class Command(BaseCommand):
    help = "Create the administrator, specialist, patient and user groups if they are missing. Safe to re-run."

    def handle(self, *args, **options):
        missing = [name for name in ROLE_PRECEDENCE if not Group.objects.filter(name=name).exists()]
        Group.objects.bulk_create([Group(name=name) for name in missing], ignore_conflicts=True)

        if missing:
            self.stdout.write(self.style.SUCCESS(f"Created role groups: {', '.join(missing)}"))
        else:
            self.stdout.write("All role groups already exist.")
