"""
Admin forms for menu and category management.
"""
from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField, StringField
from wtforms.validators import DataRequired, NumberRange, Length, Optional


class MenuItemForm(FlaskForm):
    """Create/edit form for a menu item. Category choices are set by the view."""

    name = StringField(
        'Name',
        validators=[DataRequired(message='Name is required'), Length(max=200)],
        render_kw={'placeholder': 'e.g. Margherita'}
    )

    price = StringField(
        'Price',
        validators=[DataRequired(message='Price is required'), Length(max=32)],
        render_kw={'placeholder': '0.00'}
    )

    discount = IntegerField(
        'Discount (%)',
        validators=[Optional(), NumberRange(min=0, message='Discount cannot be negative')],
        default=0,
        render_kw={'min': '0'}
    )

    order_count = IntegerField(
        'Order count',
        validators=[Optional(), NumberRange(min=0, message='Order count cannot be negative')],
        default=0,
        render_kw={'min': '0'}
    )

    category = SelectField(
        'Category',
        choices=[],
        validators=[DataRequired(message='Category is required')]
    )

    def set_category_choices(self, categories):
        self.category.choices = [(c.id, c.category) for c in categories]
        if not self.category.data and self.category.choices:
            self.category.data = self.category.choices[0][0]

    def to_fields(self):
        """Field mapping accepted by the catalog service."""
        return {
            'name': self.name.data,
            'price': self.price.data,
            'discount': self.discount.data,
            'order_count': self.order_count.data,
            'category': self.category.data,
        }


class CategoryForm(FlaskForm):
    """Form for creating a category."""

    category = StringField(
        'Category name',
        validators=[DataRequired(message='Category name is required'), Length(max=120)],
        render_kw={'placeholder': 'e.g. Appetizers'}
    )
