import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from stringdesk.catalog.models import StringBrand, StringModel, RacquetBrand, RacquetModel
from stringdesk.config import settings

engine = create_async_engine(str(settings.SQLALCHEMY_DATABASE_URI), echo=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)

STRING_CATALOG = {
    (1, "Babolat"): [(101, "RPM Blast"), (102, "Xcel"), (103, "VS Touch")],
    (2, "Luxilon"): [(201, "ALU Power"), (202, "4G"), (203, "Element")],
    (3, "Solinco"): [(301, "Hyper-G"), (302, "Tour Bite"), (303, "Confidential")],
    (4, "Wilson"): [(401, "NXT"), (402, "Synthetic Gut Power")],
    (5, "Tecnifibre"): [(501, "X-One Biphase"), (502, "Razor Code")],
}

RACQUET_CATALOG = {
    (1, "Babolat"): [(11, "Pure Aero"), (12, "Pure Drive"), (13, "Pure Strike")],
    (2, "Wilson"): [(21, "Pro Staff 97"), (22, "Blade 98"), (23, "Clash 100")],
    (3, "Head"): [(31, "Speed Pro"), (32, "Radical MP"), (33, "Gravity Pro")],
    (4, "Yonex"): [(41, "EZONE 98"), (42, "VCORE 100"), (43, "Percept 97")],
}

async def _seed_catalog(session, brand_cls, model_cls, catalog):
    existing = (await session.execute(select(brand_cls.id))).scalars().all()
    if existing:
        print(f"{brand_cls.__tablename__} already seeded, skipping.")
        return
    for (brand_id, brand_name), models in catalog.items():
        session.add(brand_cls(id=brand_id, name=brand_name))
        for model_id, model_name in models:
            session.add(model_cls(id=model_id, name=model_name, brand_id=brand_id))

async def seed_data():
    async with AsyncSessionLocal() as session:
        await _seed_catalog(session, StringBrand, StringModel, STRING_CATALOG)
        await _seed_catalog(session, RacquetBrand, RacquetModel, RACQUET_CATALOG)
        await session.commit()
        print("Catalog seeded successfully!")

if __name__ == "__main__":
    asyncio.run(seed_data())
