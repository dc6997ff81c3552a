import sys
import os

# Ajouter le dossier parent au path pour importer 'app'
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import get_settings
from app.database import get_db_context, init_db
from app.models import AnalysisRecord, Supplier


def main():
    print("🚀 Initialisation de la base de données...")
    settings = get_settings()
    print(f"📡 Connexion à : {settings.database_url.split('@')[-1]}")

    try:
        init_db()
    except Exception as e:
        print(f"❌ Erreur lors de l'initialisation : {e}")
        sys.exit(1)

    with get_db_context() as db:
        analyses = db.query(AnalysisRecord).count()
        pending = db.query(AnalysisRecord).filter(AnalysisRecord.status == "pending").count()
        suppliers = db.query(Supplier).count()

    print("✅ Tables 'analyses' et 'suppliers' prêtes !")
    print(f"   {analyses} analyses ({pending} en attente de clôture), {suppliers} fournisseurs")


if __name__ == "__main__":
    main()
