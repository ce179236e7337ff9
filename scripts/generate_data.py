"""
Demo Data Generator for the Storefront API

This script seeds an admin, a demo customer, random customers with
addresses, a category tree, products, historical orders and reviews.
"""
import os
import sys
import uuid
import random
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from django.utils.text import slugify
from faker import Faker
from apps.accounts.models import Address, Role, User
from apps.cart.models import Cart
from apps.catalog.models import Category, Product
from apps.orders.models import Order, OrderItem, OrderStatus, PaymentMethod, PaymentStatus
from apps.orders.services import calculate_totals
from apps.core.utils import generate_order_number
from apps.reviews.services import ReviewService

fake = Faker('en_IN')

CATEGORY_TREE = [
    ('Beauty & Cosmetics', ['Skincare', 'Makeup']),
    ('Fashion & Clothing', ['Dresses', 'Tops', 'Ethnic Wear']),
    ('Hosiery', []),
    ('Undergarments', []),
    ('Baby Clothing', ['Rompers']),
]

PRODUCT_TEMPLATES = [
    ('Matte Lipstick', 'Makeup', 299, 899),
    ('Vitamin C Serum', 'Skincare', 499, 1499),
    ('Floral Maxi Dress', 'Dresses', 999, 2999),
    ('Cotton Kurti', 'Ethnic Wear', 599, 1799),
    ('Silk Saree', 'Ethnic Wear', 1999, 7999),
    ('Crop Top', 'Tops', 349, 999),
    ('Sheer Stockings', 'Hosiery', 199, 599),
    ('Seamless Bra', 'Undergarments', 399, 1299),
    ('Baby Romper Set', 'Rompers', 449, 1199),
]

SIZES = ['XS', 'S', 'M', 'L', 'XL']
COLORS = ['Black', 'White', 'Red', 'Pink', 'Navy', 'Beige']


def create_user(email, password, first_name, last_name, role=Role.CUSTOMER):
    user = User(email=email, first_name=first_name, last_name=last_name,
                phone=fake.phone_number()[:20], role=role, is_verified=True)
    user.set_password(password)
    user.save()
    Cart.objects.create(user=user)
    return user


def generate_users(count=30):
    """Generate the admin, the demo customer and random customers."""
    print(f"Generating {count} customers...")
    users = [
        create_user('customer@example.com', 'customer123', 'Jane', 'Doe'),
    ]
    create_user('admin@example.com', 'admin123456', 'Admin', 'User', role=Role.ADMIN)

    for _ in range(count):
        users.append(create_user(
            email=fake.unique.email(),
            password='password123',
            first_name=fake.first_name_female(),
            last_name=fake.last_name(),
        ))

    print(f"Created {len(users)} customers and 1 admin")
    return users


def generate_addresses(users):
    """Give every customer one default address and sometimes a second one."""
    print("Generating addresses...")
    addresses = []

    for user in users:
        for i in range(random.choice([1, 1, 2])):
            address = Address(
                user=user,
                full_name=user.full_name,
                address_line1=fake.street_address(),
                city=fake.city(),
                state=fake.state(),
                postal_code=fake.postcode(),
                phone=user.phone or fake.phone_number()[:20],
                is_default=(i == 0),
            )
            address.save()
            addresses.append(address)

    print(f"Created {len(addresses)} addresses")
    return addresses


def generate_categories():
    """Generate the category tree."""
    print("Generating categories...")
    categories = {}

    for name, children in CATEGORY_TREE:
        parent = Category.objects.create(
            name=name,
            slug=slugify(name),
            description=fake.sentence(),
        )
        categories[name] = parent
        for child in children:
            categories[child] = Category.objects.create(
                name=child,
                slug=slugify(child),
                description=fake.sentence(),
                parent=parent,
            )

    print(f"Created {len(categories)} categories")
    return categories


def generate_products(categories, count=60):
    """Generate products with size/color variants."""
    print(f"Generating {count} products...")
    products = []

    for i in range(count):
        name_base, category_name, min_price, max_price = random.choice(PRODUCT_TEMPLATES)
        variation = random.choice(['Classic', 'Premium', 'Everyday', 'Luxe', 'Essential'])
        name = f"{variation} {name_base}"

        product = Product.objects.create(
            name=name,
            slug=f"{slugify(name)}-{i}",
            description=fake.paragraph(nb_sentences=3),
            price=Decimal(random.randint(min_price, max_price)),
            category=categories[category_name],
            stock=random.randint(0, 200),
            sku=f"SKU-{uuid.uuid4().hex[:8].upper()}",
            images=[fake.image_url()],
            sizes=random.sample(SIZES, k=3) if category_name not in ('Skincare', 'Makeup') else [],
            colors=random.sample(COLORS, k=2),
            tags=[slugify(name_base), slugify(category_name)],
            is_featured=random.random() < 0.2,
        )
        products.append(product)

    print(f"Created {len(products)} products")
    return products


def generate_orders(users, products, count=120):
    """Generate historical orders. Stock is not touched for seeded history."""
    print(f"Generating {count} orders...")
    orders = []

    statuses = list(OrderStatus.values)
    status_weights = [10, 10, 15, 5, 50, 10]  # Weighted probabilities

    for _ in range(count):
        user = random.choice(users)
        address = user.addresses.first()
        lines = random.sample(products, k=random.randint(1, 3))
        quantities = [random.randint(1, 3) for _ in lines]

        subtotal = sum(p.price * q for p, q in zip(lines, quantities))
        totals = calculate_totals(subtotal)
        order_status = random.choices(statuses, weights=status_weights)[0]
        payment_method = random.choice(PaymentMethod.values)

        if order_status == OrderStatus.CANCELLED:
            payment_status = PaymentStatus.REFUNDED if payment_method == PaymentMethod.STRIPE else PaymentStatus.FAILED
        elif order_status == OrderStatus.DELIVERED or payment_method == PaymentMethod.STRIPE:
            payment_status = PaymentStatus.COMPLETED
        else:
            payment_status = PaymentStatus.PENDING

        order = Order.objects.create(
            order_number=generate_order_number(),
            user=user,
            address=address,
            status=order_status,
            payment_status=payment_status,
            payment_method=payment_method,
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping_cost,
            tax=totals.tax,
            total=totals.total,
            tracking_number=f"TRK{uuid.uuid4().hex[:10].upper()}" if order_status in (
                OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED
            ) else None,
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product=product,
                quantity=quantity,
                size=random.choice(product.sizes) if product.sizes else '',
                color=random.choice(product.colors) if product.colors else '',
                price=product.price,
                position=position,
            )
            for position, (product, quantity) in enumerate(zip(lines, quantities))
        ])
        orders.append(order)

    print(f"Created {len(orders)} orders")
    return orders


def generate_reviews(orders):
    """Review a share of delivered items; ratings are recomputed per product."""
    print("Generating reviews...")
    service = ReviewService()
    count = 0

    delivered = [o for o in orders if o.status == OrderStatus.DELIVERED]
    for order in delivered:
        for item in order.items.all():
            if random.random() > 0.5:
                continue
            service.create_review(
                user=order.user,
                product_id=item.product_id,
                rating=random.choices([1, 2, 3, 4, 5], weights=[5, 5, 15, 35, 40])[0],
                comment=fake.paragraph(nb_sentences=2) if random.random() > 0.3 else None,
            )
            count += 1

    print(f"Created {count} reviews")
    return count


def clear_all_data():
    """Clear all existing data."""
    print("Clearing existing data...")

    OrderItem.objects.all().delete()
    Order.objects.all().delete()
    Product.objects.all().delete()
    Category.objects.all().delete()
    User.objects.all().delete()

    print("All data cleared")


def main():
    """Main function to generate all data."""
    print("\n" + "="*60)
    print("Storefront Demo Data Generator")
    print("="*60 + "\n")

    clear_all_data()

    users = generate_users(30)
    addresses = generate_addresses(users)
    categories = generate_categories()
    products = generate_products(categories, 60)
    orders = generate_orders(users, products, 120)
    reviews = generate_reviews(orders)

    print("\n" + "="*60)
    print("Data Generation Complete!")
    print("="*60)
    print(f"\nSummary:")
    print(f"  - Customers: {len(users)}")
    print(f"  - Addresses: {len(addresses)}")
    print(f"  - Categories: {len(categories)}")
    print(f"  - Products: {len(products)}")
    print(f"  - Orders: {len(orders)}")
    print(f"  - Reviews: {reviews}")
    print()


if __name__ == '__main__':
    main()
