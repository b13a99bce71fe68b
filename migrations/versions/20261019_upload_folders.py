"""folders, upload files and upload settings"""

from alembic import op
import sqlalchemy as sa


revision = "20261019_upload_folders"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "folders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("uid", sa.String(32), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "parent_id",
            sa.Integer,
            sa.ForeignKey("folders.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("parent_scope", sa.Integer, nullable=False, server_default="0"),
        sa.Column("path", sa.String(2048), nullable=False),
        sa.Column(
            "created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
        ),
        sa.Column(
            "updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
        ),
        sa.UniqueConstraint("parent_scope", "name", name="uq_folder_scope_name"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_folders_parent_id", "folders", ["parent_id"])
    op.create_index("ix_folders_path", "folders", ["path"])

    op.create_table(
        "upload_files",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column("mime", sa.String(128), nullable=True),
        sa.Column("size", sa.BigInteger, nullable=False),
        sa.Column("sha256", sa.String(64), nullable=False),
        sa.Column("storage_ref", sa.String(1024), nullable=False),
        sa.Column(
            "folder_id",
            sa.Integer,
            sa.ForeignKey("folders.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("folder_path", sa.String(2048), nullable=False, server_default="/"),
        sa.Column("ref_id", sa.String(64), nullable=True),
        sa.Column("ref_type", sa.String(255), nullable=True),
        sa.Column("field", sa.String(255), nullable=True),
        sa.Column(
            "created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
        ),
        sa.Column(
            "updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_upload_files_folder_id", "upload_files", ["folder_id"])
    op.create_index("ix_upload_files_sha256", "upload_files", ["sha256"])
    op.create_index("ix_upload_files_ref", "upload_files", ["ref_type", "ref_id"])

    op.create_table(
        "upload_settings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("key", sa.String(120), nullable=False, unique=True),
        sa.Column("value", sa.JSON, nullable=True),
        sa.Column(
            "updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
        ),
    )


def downgrade():
    op.drop_table("upload_settings")

    op.drop_index("ix_upload_files_ref", table_name="upload_files")
    op.drop_index("ix_upload_files_sha256", table_name="upload_files")
    op.drop_index("ix_upload_files_folder_id", table_name="upload_files")
    op.drop_table("upload_files")

    op.drop_index("ix_folders_path", table_name="folders")
    op.drop_index("ix_folders_parent_id", table_name="folders")
    op.drop_table("folders")
