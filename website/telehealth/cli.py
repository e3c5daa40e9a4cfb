import click

from telehealth.exceptions import DataAccessError
from telehealth.extensions import db
from telehealth.seeders import create_doctor_account, seed_directory

def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("seed")
    @click.option("--flush", is_flag=True, help="Insert the sample directory even if one exists.")
    def seed(flush):
        """Seed health centers and doctors."""
        stats = seed_directory(flush=flush)
        for relation, count in stats.items():
            click.echo(f"{relation}: {count} inserted")

    @app.cli.command("create-doctor")
    @click.option("--email", required=True)
    @click.option("--password", required=True, prompt=True, hide_input=True)
    @click.option("--doctor-name", required=True, help="Name of the doctor record to link.")
    def create_doctor(email, password, doctor_name):
        """Create a doctor sign-in linked to an existing doctor record."""
        try:
            user = create_doctor_account(email, password, doctor_name)
        except DataAccessError as e:
            raise click.ClickException(e.message)
        click.echo(f"Doctor account {user.email} linked to {doctor_name}.")
