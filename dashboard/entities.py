"""
Content types managed by the dashboard.

Each ``EntityType`` describes one remote table: how to turn a submitted form
into a row payload, how to seed an edit form from a row, how rows are
ordered and which columns the listing shows. Every list view, dialog and
route works from these descriptions.
"""
from collections import namedtuple

from dashboard.forms import EventForm, NewsForm, BlogForm, SponsoredForm, TeamMemberForm
from dashboard.repository import OrderSpec

NOT_CONFIRMED = 'not confirmed'

# header: column title; field: row key; kind: how the template renders the cell
Column = namedtuple('Column', ['header', 'field', 'kind'])
Column.__new__.__defaults__ = ('text',)


class EntityType:

    def __init__(self, key, table, folder, label, title, form_class, columns,
                 fields, order=None, display_field='name'):
        self.key = key
        self.table = table
        self.folder = folder
        self.label = label
        self.title = title
        self.form_class = form_class
        self.columns = columns
        self.fields = fields
        self.order = order or []
        self.display_field = display_field

    def __repr__(self):
        return f'<EntityType {self.key}>'

    def to_fields(self, form):
        """Editable columns of a row, taken from a validated form. Image excluded."""
        return {name: getattr(form, name).data for name in self.fields}

    def to_form_data(self, record):
        """Values used to seed the edit form for ``record``."""
        return {name: record.get(name) for name in self.fields}

    def display_name(self, record):
        return record.get(self.display_field) or f'#{record.get("id")}'


class SponsoredEntityType(EntityType):
    """Sponsored events carry ordered ``details`` and ``links`` sequences"""

    def to_fields(self, form):
        fields = super().to_fields(form)
        # FormField's own label and description shadow the subform fields; go through .form
        fields['details'] = [
            {'title': entry.form.title.data or '', 'description': entry.form.description.data or ''}
            for entry in form.details
        ]
        fields['links'] = [
            {'label': entry.form.label.data or '', 'url': entry.form.url.data or ''}
            for entry in form.links
        ]
        return fields

    def to_form_data(self, record):
        data = super().to_form_data(record)
        data['details'] = list(record.get('details') or [])
        data['links'] = [normalize_link(link) for link in record.get('links') or []]
        return data


def normalize_link(link):
    """Accept rows written with the older ``linkName``/``link`` keys."""
    return {
        'label': link.get('label', link.get('linkName', '')),
        'url': link.get('url', link.get('link', '')),
    }


EVENTS = EntityType(
    key='events',
    table='events',
    folder='events',
    label='event',
    title='Events',
    form_class=EventForm,
    fields=['name', 'venue', 'date', 'time', 'description'],
    columns=[
        Column('Image', 'image', 'image'),
        Column('Name', 'name'),
        Column('Venue', 'venue'),
        Column('Description', 'description', 'truncate'),
        Column('Date', 'date', 'confirmed'),
        Column('Time', 'time', 'confirmed'),
    ],
)

NEWS = EntityType(
    key='news',
    table='news',
    folder='news',
    label='news',
    title='News',
    form_class=NewsForm,
    fields=['name', 'content', 'link', 'type'],
    columns=[
        Column('Image', 'image', 'image'),
        Column('Headline', 'name'),
        Column('Content', 'content', 'html'),
        Column('Link', 'link', 'link'),
        Column('Type', 'type', 'badge'),
    ],
)

BLOGS = EntityType(
    key='blogs',
    table='blogs',
    folder='blogs',
    label='blog',
    title='Blogs',
    form_class=BlogForm,
    fields=['title', 'content', 'author', 'date'],
    display_field='title',
    columns=[
        Column('Image', 'image', 'image'),
        Column('Title', 'title'),
        Column('Author', 'author'),
        Column('Date', 'date'),
        Column('Content', 'content', 'html'),
    ],
)

SPONSORED = SponsoredEntityType(
    key='sponsored',
    table='sponsoreds',
    folder='images',
    label='sponsored event',
    title='Sponsored Events',
    form_class=SponsoredForm,
    fields=['name', 'status'],
    columns=[
        Column('Image', 'image', 'image'),
        Column('Name', 'name'),
        Column('Status', 'status', 'badge'),
        Column('Details', 'details', 'details'),
        Column('Links', 'links', 'links'),
    ],
)

TEAM = EntityType(
    key='team',
    table='team_members',
    folder='team',
    label='team member',
    title='Team Members',
    form_class=TeamMemberForm,
    fields=['name', 'designation', 'quote', 'status', 'order_index'],
    order=[
        OrderSpec('order_index', desc=False, nulls_first=False),
        OrderSpec('created_at', desc=False),
    ],
    columns=[
        Column('Photo', 'image', 'image'),
        Column('Name', 'name'),
        Column('Designation', 'designation', 'badge'),
        Column('Quote', 'quote', 'truncate'),
        Column('Status', 'status', 'badge'),
        Column('Order', 'order_index'),
    ],
)

ENTITIES = {entity.key: entity for entity in (EVENTS, NEWS, BLOGS, SPONSORED, TEAM)}


def get_entity(key):
    """Look up an entity type by its URL key; None when unknown"""
    return ENTITIES.get(key)
