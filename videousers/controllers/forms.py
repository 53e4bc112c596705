"""Forms used to validate account request data."""

from wtforms import StringField, PasswordField, Form
from wtforms.validators import DataRequired


class RegistrationForm(Form):
    """Data required to create an account. The files are handled separately."""

    full_name = StringField('Full name', validators=[DataRequired()])
    email = StringField('Email address', validators=[DataRequired()])
    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])


class LoginForm(Form):
    """Log in form."""

    email = StringField('Email address', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])


class PasswordForm(Form):
    """Change the password of the authenticated user."""

    old_password = PasswordField('Old password', validators=[DataRequired()])
    new_password = PasswordField('New password', validators=[DataRequired()])


class AccountDetailsForm(Form):
    """Update the details of the authenticated user."""

    full_name = StringField('Full name', validators=[DataRequired()])
    email = StringField('Email address', validators=[DataRequired()])
