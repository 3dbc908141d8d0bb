from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from apps.core.models import UserProfile


class Command(BaseCommand):
    help = 'Tworzy konto ADMIN (pierwsze uruchomienie)'

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('password')
        parser.add_argument('--name', default='Admin')

    def handle(self, *args, **options):
        email = options['email'].lower()
        if User.objects.filter(username=email).exists():
            raise CommandError(f'Użytkownik {email} już istnieje.')

        user = User.objects.create_user(
            username=email,
            email=email,
            password=options['password'],
            first_name=options['name'],
            is_staff=True,
        )
        UserProfile.objects.filter(user=user).update(role=UserProfile.RoleChoices.ADMIN)

        self.stdout.write(self.style.SUCCESS(f'Utworzono administratora {email}.'))
