from movies_api.db.migration import AbstractMigration


class CreateMoviesTable(AbstractMigration):

    def change(self):
        self.table("movies") \
            .add_column("name", "text") \
            .add_column("year", "text") \
            .add_column("director", "text") \
            .add_column("summary", "text") \
            .create()
