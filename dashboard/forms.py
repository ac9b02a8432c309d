from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileAllowed
from wtforms import Form, StringField, PasswordField, TextAreaField, SelectField, IntegerField, BooleanField, SubmitField, FieldList, FormField
from wtforms.validators import DataRequired, Email, Length, Optional, Regexp

IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif', 'webp']

DATE_INPUT = {"type": "date"}
TIME_INPUT = {"type": "time"}


def blank_to_none(value):
    """Filter turning empty strings into None so optional columns store null"""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember = BooleanField('Remember Me')
    submit = SubmitField('Sign In')


class ConfirmDeleteForm(FlaskForm):
    confirm = SubmitField('Delete')
    cancel = SubmitField('Cancel')


class ContentForm(FlaskForm):
    """Fields shared by every content dialog"""
    image = FileField('Image', validators=[
        Optional(),
        FileAllowed(IMAGE_EXTENSIONS, 'Images only (JPG, JPEG, PNG, GIF, WEBP)')
    ])
    remove_image = BooleanField('Remove current image')


class EventForm(ContentForm):
    name = StringField('Event Name', validators=[DataRequired(), Length(max=200)])
    venue = StringField('Venue', validators=[DataRequired(), Length(max=200)])
    date = StringField('Date', filters=[blank_to_none], render_kw=DATE_INPUT,
                       validators=[Optional(), Regexp(r'^\d{4}-\d{2}-\d{2}$', message='Use YYYY-MM-DD')])
    time = StringField('Time', filters=[blank_to_none], render_kw=TIME_INPUT,
                       validators=[Optional(), Regexp(r'^\d{2}:\d{2}(:\d{2})?$', message='Use HH:MM')])
    description = TextAreaField('Description', validators=[DataRequired()])


class NewsForm(ContentForm):
    name = StringField('Headline', validators=[DataRequired(), Length(max=200)])
    content = TextAreaField('Content', validators=[DataRequired()],
                            render_kw={"rows": 8, "class": "rich-text"})
    link = StringField('Link', filters=[blank_to_none], validators=[Optional(), Length(max=500)])
    type = SelectField('Type', choices=[
        ('normal', 'Normal'),
        ('special', 'Special')
    ], default='normal')


class BlogForm(ContentForm):
    title = StringField('Title', validators=[DataRequired(), Length(max=200)])
    content = TextAreaField('Content', validators=[DataRequired()],
                            render_kw={"rows": 12, "class": "rich-text"})
    author = StringField('Author', validators=[DataRequired(), Length(max=100)])
    date = StringField('Date', filters=[blank_to_none], render_kw=DATE_INPUT,
                       validators=[Optional(), Regexp(r'^\d{4}-\d{2}-\d{2}$', message='Use YYYY-MM-DD')])


class DetailEntryForm(Form):
    # Entries may be left empty; they are stored as-is
    title = StringField('Title', validators=[Optional()])
    description = TextAreaField('Description', validators=[Optional()])


class LinkEntryForm(Form):
    label = StringField('Label', validators=[Optional()])
    url = StringField('URL', validators=[Optional()])


class SponsoredForm(ContentForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    status = SelectField('Status', choices=[
        ('Active', 'Active'),
        ('Inactive', 'Inactive')
    ], default='Inactive', validators=[DataRequired()])
    details = FieldList(FormField(DetailEntryForm))
    links = FieldList(FormField(LinkEntryForm))


class TeamMemberForm(ContentForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    designation = StringField('Designation', validators=[DataRequired(), Length(max=100)])
    quote = TextAreaField('Quote', filters=[blank_to_none], validators=[Optional(), Length(max=500)])
    status = SelectField('Status', choices=[
        ('active', 'Active'),
        ('inactive', 'Inactive')
    ], default='active', validators=[DataRequired()])
    order_index = IntegerField('Display Order', validators=[Optional()])
