import os
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

class Command(BaseCommand):
    help = 'Create the platform super admin from SUPERUSER_USERNAME, SUPERUSER_EMAIL and SUPERUSER_PASSWORD'

    def handle(self, *args, **options):
        User = get_user_model()
        username = os.environ.get('SUPERUSER_USERNAME')
        email = os.environ.get('SUPERUSER_EMAIL')
        password = os.environ.get('SUPERUSER_PASSWORD')

        if not (username and email and password):
            self.stdout.write(self.style.WARNING('SUPERUSER_* variables not set, skipping'))
            return

        if User.objects.filter(username=username).exists():
            self.stdout.write(self.style.WARNING('Superuser already exists'))
            return

        user = User.objects.create_superuser(username, email, password)
        # Platform operator, not bound to any tenant
        user.role = 'super_admin'
        user.save(update_fields=['role'])
        self.stdout.write(self.style.SUCCESS(f'Superuser {username} created'))
