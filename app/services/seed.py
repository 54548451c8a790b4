"""
Default catalogue data.

A fresh database gets the standard categories, membership plans and
back-office roles so the admin UI has something to work with. Seeding only
runs against an empty categories table and never touches existing rows.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.models.category import Category
from app.models.membership_type import MembershipType, PlanVisibility
from app.models.role import PERMISSIONS, Role

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {
        "nombre_categoria": "Juegos Infantiles",
        "descripcion": "Columpios, resbaladillas y estructuras de juego para parques",
        "icono": "Gamepad2",
    },
    {
        "nombre_categoria": "Mobiliario Urbano",
        "descripcion": "Bancas, kioscos, pérgolas y estructuras urbanas",
        "icono": "Building2",
    },
    {
        "nombre_categoria": "Superficies Deportivas",
        "descripcion": "Pisos y canchas para actividades deportivas",
        "icono": "Home",
    },
    {
        "nombre_categoria": "Iluminación y Energía",
        "descripcion": "Iluminación LED y soluciones de energía para espacios públicos",
        "icono": "Zap",
    },
    {
        "nombre_categoria": "Paisajismo y Riego",
        "descripcion": "Diseño de áreas verdes y sistemas de riego",
        "icono": "Palette",
    },
]

DEFAULT_MEMBERSHIP_TYPES = [
    {
        "nombre_plan": "Básico",
        "descripcion_plan": "Membresía básica con funcionalidades esenciales",
        "opciones_precios": [{"periodicidad": "mensual", "costo": 150.0}],
        "beneficios": ["Listado en directorio", "Información básica de contacto", "1 imagen de producto"],
        "visibilidad": PlanVisibility.publica,
    },
    {
        "nombre_plan": "Premium",
        "descripcion_plan": "Membresía premium con características avanzadas",
        "opciones_precios": [{"periodicidad": "mensual", "costo": 300.0}],
        "beneficios": [
            "Listado destacado",
            "Galería de productos",
            "Videos promocionales",
            "Ubicación en mapa",
            "Múltiples categorías",
        ],
        "visibilidad": PlanVisibility.publica,
    },
    {
        "nombre_plan": "Enterprise",
        "descripcion_plan": "Solución empresarial completa",
        "opciones_precios": [{"periodicidad": "mensual", "costo": 500.0}],
        "beneficios": [
            "Posición premium",
            "Galería ilimitada",
            "Videos ilimitados",
            "Soporte prioritario",
            "Analíticas avanzadas",
        ],
        "visibilidad": PlanVisibility.publica,
    },
]

DEFAULT_ROLES = [
    {
        "nombre": "admin",
        "descripcion": "Administrador del sistema con acceso completo",
        "permisos": list(PERMISSIONS),
    },
    {
        "nombre": "representante",
        "descripcion": "Representante de empresa que puede gestionar su compañía y comentarios",
        "permisos": ["companies.read", "companies.write", "opinions.read", "opinions.write"],
    },
    {
        "nombre": "user",
        "descripcion": "Usuario básico con permisos de lectura",
        "permisos": ["companies.read", "opinions.read"],
    },
]


async def seed_default_data(db: AsyncSession) -> bool:
    """Insert the default catalogue into an empty database.

    Returns True when rows were inserted.
    """
    existing = (await db.execute(select(func.count()).select_from(Category))).scalar()
    if existing:
        logger.debug("Categories already present, skipping seed")
        return False

    db.add_all(Category(**data) for data in DEFAULT_CATEGORIES)
    db.add_all(MembershipType(**data) for data in DEFAULT_MEMBERSHIP_TYPES)

    role_names = set((await db.execute(select(Role.nombre))).scalars().all())
    db.add_all(Role(**data) for data in DEFAULT_ROLES if data["nombre"] not in role_names)

    await db.commit()
    logger.info(
        f"Seeded {len(DEFAULT_CATEGORIES)} categories and {len(DEFAULT_MEMBERSHIP_TYPES)} membership plans"
    )
    return True
